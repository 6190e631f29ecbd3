"""auth/ -- Session relay and current-user helpers for BarberDesk.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/, web/, or catalog/.
api/ and web/ import from auth/, not the other way around.
"""
