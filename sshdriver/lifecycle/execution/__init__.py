"""Execution pipeline for the lifecycle driver.

- **resolver**: Connection resolution (settings + runtime state -> ConnectionDescriptor)
- **runner**: Single remote command execution (proxy env, error translation)
- **transfer**: File delivery (compress -> upload supports + archive -> unpack)
"""
