"""
CamManager - Services
In-memory stores, access control and outbound integrations
"""
