"""
CamManager - Camera and recorder inventory backend
"""
