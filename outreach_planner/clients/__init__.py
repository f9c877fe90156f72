"""Outbound collaborators: Linkt API and sandbox control"""
