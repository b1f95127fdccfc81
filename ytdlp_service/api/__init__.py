"""
API Layer

Flask blueprint, flask-restx namespaces and request middleware.
"""
