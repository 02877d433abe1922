"""
Centralized test suite for the Fisheries Trading Back-Office.

Test Organization:
- integration/ - API integration tests, one module per business area
- conftest.py - shared users, clients and payload builders
"""
