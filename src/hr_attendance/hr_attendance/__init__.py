"""HR attendance package.

Organized by feature modules (geofence, accounting, attendance, toil, ...)
with a thin Flask controller layer over service/repository layers.
"""
