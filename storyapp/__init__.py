"""
StoryApp API Test Suite
Exercises the Story Spoiler API (create, edit, list, delete) over HTTP with JWT auth.
"""
__version__ = "1.0.0"
