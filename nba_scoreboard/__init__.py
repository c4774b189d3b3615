"""
NBA scoreboard service: daily scores, date navigation and box scores.
"""
