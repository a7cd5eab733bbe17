"""Library check-in kiosk package.

Organized by feature modules (students, attendance, access, ...) with a thin
Flask controller layer on top of service/repository layers. Storage is either
MySQL or Google Sheets, chosen once at startup.
"""
