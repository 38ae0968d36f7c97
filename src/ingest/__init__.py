"""Fund data ingestion.

This package fetches raw challenge, proposal, and assessment records
and orchestrates their push into the relational store.
"""
