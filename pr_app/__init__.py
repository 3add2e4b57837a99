"""
KMIT PR App 백엔드 - 동아리, 행사, 공지, 명예의 전당
"""

__version__ = "1.0.0"
