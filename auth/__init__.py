"""auth/ -- Credential storage, token issuance and the access gate for JokeVault.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or jokes/.
api/ and jokes/ import from auth/, not the other way around.
"""
