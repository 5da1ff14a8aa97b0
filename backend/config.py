import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///skyhigh.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Wallet and bet limits (virtual coins)
    INITIAL_BALANCE = float(os.environ.get('INITIAL_BALANCE', '1000'))
    MIN_BET = int(os.environ.get('MIN_BET', '10'))
    MAX_BET = int(os.environ.get('MAX_BET', '5000'))
    DEFAULT_BET = int(os.environ.get('DEFAULT_BET', '100'))
    BET_PRESETS = [int(v) for v in os.environ.get('BET_PRESETS', '50,100,200,500').split(',') if v.strip()]
    BALANCE_KEY = os.environ.get('BALANCE_KEY', 'skyhigh_balance')
    # Round timing
    GROWTH_RATE = float(os.environ.get('GROWTH_RATE', '0.05'))
    PRE_START_DELAY_MS = int(os.environ.get('PRE_START_DELAY_MS', '3000'))
    CRASH_RESET_DELAY_MS = int(os.environ.get('CRASH_RESET_DELAY_MS', '4000'))
    HISTORY_LIMIT = int(os.environ.get('HISTORY_LIMIT', '20'))
    # Frame pump cadence (~60fps)
    FRAME_INTERVAL_MS = int(os.environ.get('FRAME_INTERVAL_MS', '16'))
    # Optional: heartbeat interval for frame pump logs (sec). 0 disables.
    PUMP_HEARTBEAT_SEC = int(os.environ.get('PUMP_HEARTBEAT_SEC', '0'))
    # Advisory text: 'fallback' (offline) or 'gemini'
    ADVISOR_PROVIDER = os.environ.get('ADVISOR_PROVIDER', 'fallback')
    ADVISOR_HISTORY_WINDOW = int(os.environ.get('ADVISOR_HISTORY_WINDOW', '10'))
    GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY') or os.environ.get('API_KEY', '')
    GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash')
