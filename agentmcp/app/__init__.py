"""
HTTP front end for agentmcp.
"""
