"""
Search index package.

- models: postings and search results
- index_builder: immutable index assembly from decoded clusters
- searcher: frequency-sum query scoring
"""
