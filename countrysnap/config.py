import os


class Config:
    # World boundaries (GeoJSON FeatureCollection); a local path also works
    WORLD_URL = os.environ.get('COUNTRYSNAP_WORLD_URL') or 'https://raw.githubusercontent.com/holtzy/D3-graph-gallery/master/DATA/world.geojson'
    FACTS_URL = os.environ.get('COUNTRYSNAP_FACTS_URL') or 'https://restcountries.com/v3.1/alpha'
    # Leaderboard file; empty keeps it in memory
    LEADERBOARD_PATH = os.environ.get('COUNTRYSNAP_LEADERBOARD_PATH', os.path.join(os.path.expanduser('~'), '.countrysnap', 'leaderboard.json'))
    # Hint generation (Gemini). No key means canned hints only.
    GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY') or os.environ.get('API_KEY')
    HINT_MODEL = os.environ.get('COUNTRYSNAP_HINT_MODEL', 'gemini-2.5-flash')
    # Outbound request timeout (seconds)
    HTTP_TIMEOUT = float(os.environ.get('COUNTRYSNAP_HTTP_TIMEOUT', '10'))
    # Pause before a new target is shown, while the camera zooms out (seconds)
    REVEAL_DELAY = float(os.environ.get('COUNTRYSNAP_REVEAL_DELAY', '1.5'))
    # How long "Incorrect!" stays up (seconds)
    MESSAGE_DELAY = float(os.environ.get('COUNTRYSNAP_MESSAGE_DELAY', '1.5'))
    LOG_LEVEL = os.environ.get('COUNTRYSNAP_LOG_LEVEL', 'INFO')
    ALLOWED_ORIGINS = os.environ.get('ALLOWED_ORIGINS', '*').split(',')
