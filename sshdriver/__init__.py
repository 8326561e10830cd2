"""sshdriver - lifecycle driver for test instances reachable over SSH."""
