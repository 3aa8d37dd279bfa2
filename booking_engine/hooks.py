app_name = "booking_engine"
app_title = "Booking Engine"
app_publisher = "Booking Engine Developers"
app_description = "Motor de agenda multi-tenant: disponibilidad, slots, citas y bloqueos"
app_email = "dev@booking-engine.local"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# Includes in <head>
# ------------------

# include js, css files in header of desk.html
# app_include_css = "/assets/booking_engine/css/booking_engine.css"
# app_include_js = "/assets/booking_engine/js/booking_engine.js"

# Installation
# ------------

# Crea los roles Booking Owner / Admin / Attendant / Provider
after_install = "booking_engine.install.after_install"

# Uninstallation
# ------------

# before_uninstall = "booking_engine.uninstall.before_uninstall"
# after_uninstall = "booking_engine.uninstall.after_uninstall"

# Permissions
# -----------
# Permissions evaluated in scripted ways

# permission_query_conditions = {
# 	"Booking Appointment": "booking_engine.permissions.get_permission_query_conditions",
# }

# Document Events
# ---------------
# Hook on document methods and events

# doc_events = {
# 	"*": {
# 		"on_update": "method",
# 		"on_cancel": "method",
# 		"on_trash": "method"
# 	}
# }

# Scheduled Tasks
# ---------------
# Sin tareas programadas: cada request es una unidad de trabajo independiente

# scheduler_events = {
# 	"daily": [
# 		"booking_engine.tasks.daily"
# 	],
# }

# Testing
# -------

before_tests = "booking_engine.install.after_install"

# Overriding Methods
# ------------------------------
#
# override_whitelisted_methods = {
# 	"frappe.desk.doctype.event.event.get_events": "booking_engine.event.get_events"
# }

# User Data Protection
# --------------------

# user_data_fields = [
# 	{
# 		"doctype": "{doctype_1}",
# 		"filter_by": "{filter_by}",
# 		"redact_fields": ["{field_1}", "{field_2}"],
# 		"partial": 1,
# 	},
# ]
