# Services package init
"""
CivicMap Backend — Services Layer
==================================

What:  Read logic between routes (HTTP) and the document store.

Service Inventory:
    - mappers: pure record mappers, stored document → API value
    - CivicDataService: one full-collection read per resource type
    - WelcomeService: reads the welcome text file
"""
