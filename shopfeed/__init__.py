"""Notification feed service for the shop manager dashboard.

The package re-exports nothing; importing submodules explicitly keeps the
database engine from being created until it is actually needed.
"""
