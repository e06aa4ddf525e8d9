"""Routing — ordered route table with first-match dispatch.

Routes are registered during bootstrap, optionally inside nested groups
that contribute a path prefix and middleware.
"""
