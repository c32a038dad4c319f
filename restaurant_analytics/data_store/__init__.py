"""
Record store for restaurant and order data.

Responsibilities:
- Read the restaurants and orders JSON datasets into DataFrames.
- Derive the helper columns used by case-insensitive and date/hour filters.
- Hold one immutable snapshot and swap it for a fresh one once its TTL expires.
"""
