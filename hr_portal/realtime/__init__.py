"""Realtime infrastructure (Socket.IO).

Notifications, approval updates and attendance boards share one socket
server so the frontend keeps a single connection.
"""
