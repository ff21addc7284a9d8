from .reminders import reminder_settings_section, pending_reminders_section, alerts_section
