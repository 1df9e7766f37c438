"""
Catalog access: HTTP client, HTML parsing, and the catalog data provider.

Keeps the HTTP mechanics (catalog_client), the page-structure knowledge
(catalog_parser), and the record-level API (catalog_data_provider) apart so
each can be tested without the others.
"""
