from django.dispatch import Signal

# Sent once per successful onboarding submission with ``user``.
profile_setup_completed = Signal()
