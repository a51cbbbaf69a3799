"""
Token validation package.

Contains the claim model, the claim policy checks and the verification
pipeline that ties decoding, key resolution and signature checks together.
"""
