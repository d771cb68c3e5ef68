"""
Commands - CLI command implementations for Warden.

- account: generate and show the local account
- balance: native-coin balance lookup
- send:    build, sign and broadcast a native transfer or contract call
- token:   ERC-20 balance and transfer
"""
