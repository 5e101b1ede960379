"""CardHub package.

Feature modules (companies, employees, subscriptions, visits) expose a JSON
API over MySQL repositories; the portal module renders cards and the usage
dashboard on top of that API.
"""
