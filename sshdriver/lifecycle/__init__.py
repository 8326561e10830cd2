"""Lifecycle driver for instances reachable over SSH.

- **driver**: ``SSHBase``, the lifecycle surface (converge/setup/verify/...)
- **execution**: connection resolution, command runner, transfer pipeline
- **compression**: compressor registry (gzip, xz, none)
- **transport**: session protocol and the paramiko-backed ``SSHSession``
"""
