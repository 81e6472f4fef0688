"""Constants for qbscore."""

# Tossup scoring (overridable through data/match_config.json)
CORRECT_BUZZ_POINTS = 10
NEG_BUZZ_POINTS = -5

# Standard bonus part value used when a packet doesn't give one
DEFAULT_BONUS_PART_VALUE = 10

MAX_TEAMS = 2

# Saved match format understood by snapshot.load_game
SNAPSHOT_VERSION = 1

# Marker shown after the last word so a reader can record end-of-question buzzes
END_OF_QUESTION_MARKER = '■'

# Scoresheet layout (1-based columns). Each team gets (tossup, bonus) columns,
# followed by one running-total column per team.
SCORESHEET_SHEET_NAME = 'Scoresheet'
SCORESHEET_ROSTER_SHEET_NAME = 'Roster'
SCORESHEET_FIRST_DATA_ROW = 2
SCORESHEET_TEAM_COLUMNS = [(3, 4), (5, 6)]
SCORESHEET_TOTAL_COLUMNS = [7, 8]
