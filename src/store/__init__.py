"""Relational store access.

This package wraps the Supabase REST API, chunks bulk inserts,
and exposes the SDK client used by the CLI.
"""
