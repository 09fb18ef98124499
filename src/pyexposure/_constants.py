"""Internal constants shared across the library."""

RETRIEVE_URL = "https://retrieval.covidshield.app"
SUBMIT_URL = "https://submission.covidshield.app"
USER_AGENT = "pyexposure"

# ------------------------------------------------------------------
# Persistence keys (non-secure store)
# ------------------------------------------------------------------

LAST_CHECK_TIMESTAMP = "lastCheckTimeStamp"
SUBMISSION_CYCLE_STARTED_AT = "submissionCycleStartedAt"
SUBMISSION_LAST_COMPLETED_AT = "submissionLastCompletedAt"

# ------------------------------------------------------------------
# Secure persistence
# ------------------------------------------------------------------

SUBMISSION_AUTH_KEYS = "submissionAuthKeys"
KEYCHAIN_SERVICE = "covidShieldKeychain"
SHARED_PREFERENCES_NAME = "covidShieldSharedPreferences"

# ------------------------------------------------------------------
# Backfill / submission windows
# ------------------------------------------------------------------

#: Length of one diagnosis-key period in hours.
PERIOD_HOURS = 12
#: Periods covered by one fetch step (two half-day periods = one day).
PERIODS_PER_FETCH = 2
#: Maximum diagnosis-key retention; bounds the backfill look-back.
LOOKBACK_DAYS = 14
SUBMISSION_CYCLE_DAYS = 14

# ------------------------------------------------------------------
# Local notification translation keys
# ------------------------------------------------------------------

EXPOSED_TITLE_KEY = "Notification.ExposedMessageTitle"
EXPOSED_BODY_KEY = "Notification.ExposedMessageBody"
DAILY_UPLOAD_TITLE_KEY = "Notification.DailyUploadNotificationTitle"
DAILY_UPLOAD_BODY_KEY = "Notification.DailyUploadNotificationBody"
