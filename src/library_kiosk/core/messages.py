"""User-facing messages (Thai, as shown on the kiosk)."""

MISSING_CHECKIN_FIELDS = "กรุณาระบุเลขประจำตัวและจุดประสงค์"
MISSING_FIELDS = "กรุณาระบุข้อมูลให้ครบ"
UNKNOWN_STUDENT = "ไม่พบนักเรียนในระบบ"
STUDENT_NOT_FOUND = "ไม่พบนักเรียน"
INVALID_ID = "รหัสไม่ถูกต้อง"

ADMIN_PASSWORD_NOT_CONFIGURED = "ระบบยังไม่ตั้งค่ารหัสผ่านผู้ดูแล"
ADMIN_PASSWORD_REQUIRED = "กรุณาระบุรหัสผ่าน"
ADMIN_PASSWORD_INVALID = "รหัสผ่านไม่ถูกต้อง"
ADMIN_REQUIRED = "กรุณาเข้าสู่ระบบผู้ดูแล"

DATABASE_UNAVAILABLE = "ไม่สามารถเชื่อมต่อฐานข้อมูลได้"
SHEETS_UNAVAILABLE = "ไม่สามารถเชื่อมต่อ Google Sheets ได้"
SYSTEM_ERROR = "เกิดข้อผิดพลาดของระบบ"
