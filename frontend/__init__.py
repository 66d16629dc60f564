"""
Frontend Boundary

Read-only render contracts, the single layout -> render mapper, and
interaction routing back into sessions. Nothing here computes layout.
"""
