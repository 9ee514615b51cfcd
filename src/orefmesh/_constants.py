"""Internal constants shared across the package."""

LIVE_URL = "https://www.oref.org.il/WarningMessages/alert/alerts.json"
HISTORY_URL = "https://www.oref.org.il/WarningMessages/alert/alertsHistory.json"
REFERER = "https://www.oref.org.il/11226-he/pakar.aspx"
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_13_6) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/75.0.3770.100 Safari/537.36"
)

#: Substring ("test" in Hebrew) marking exercise localities in the feed.
TEST_MARKER = "בדיקה"

#: Alert label used when no category is present.
NO_ALERT = "none"

RADIO_EXECUTABLE = "meshtastic"
RADIO_CONNECTED_SENTINEL = "Connected to radio"
BROADCAST_CHANNEL = 0

ALERT_PREFIX = "\U0001f6a8"


def empty_alert_payload() -> dict[str, object]:
    """Neutral payload returned whenever the feed has nothing usable."""
    return {"type": NO_ALERT, "cities": []}
