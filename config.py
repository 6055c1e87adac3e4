# Configuration settings for the Streamlit app
import os

from dotenv import load_dotenv

load_dotenv()

# Upstream APIs
SLEEPER_BASE_URL = os.getenv("SLEEPER_BASE_URL", "https://api.sleeper.app/v1")
SLEEPER_CDN_URL = os.getenv("SLEEPER_CDN_URL", "https://sleepercdn.com/content/nfl/players")
STATS_API_BASE_URL = os.getenv("STATS_API_BASE_URL", "https://api.sportsdata.io/v2/json")
STATS_API_KEY = os.getenv("STATS_API_KEY", "")

# Seconds before an upstream request is abandoned
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))

# Where the login session is persisted between app restarts
SESSION_FILE = os.getenv("SESSION_FILE", os.path.join(os.path.dirname(os.path.abspath(__file__)), ".session.json"))

# Pre-fills the league form on the dashboard
DEFAULT_LEAGUE_ID = os.getenv("DEFAULT_LEAGUE_ID", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Weeks shown on the schedule tab when the NFL state reports an earlier week
REGULAR_SEASON_WEEKS = 18

# Seasons offered on the player stat sheet
SEASON_CHOICES = 5
