"""
Query and aggregation engine over a record snapshot.

Responsibilities:
- Compose named predicates into one conjunctive filter over a DataFrame.
- Search, sort and paginate the restaurant catalog.
- Filter and paginate orders.
- Bucket a restaurant's orders into daily trends with a peak hour.
- Rank restaurants by total revenue and join them with their details.
"""
