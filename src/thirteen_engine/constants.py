"""Game constants"""

RANKS = ['3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A', '2']
SUITS = ['s', 'c', 'd', 'h']  # spades < clubs < diamonds < hearts

SUIT_SYMBOLS = {'s': '♠', 'c': '♣', 'd': '♦', 'h': '♥'}

TOP_RANK = '2'

# Play types
PLAY_SINGLE = 'single'
PLAY_PAIR = 'pair'
PLAY_TRIPLET = 'triplet'
PLAY_QUARTET = 'quartet'
PLAY_SEQUENCE = 'sequence'
PLAY_DOUBLE_SEQUENCE = 'double_sequence'

SAME_RANK_TYPES = {
    1: PLAY_SINGLE,
    2: PLAY_PAIR,
    3: PLAY_TRIPLET,
    4: PLAY_QUARTET,
}

MIN_SEQUENCE_LEN = 3
MIN_DOUBLE_SEQUENCE_LEN = 6

# Bombs allowed against a table led by a rank-2 combination: (type, minimum size)
BOMB_TABLE = {
    PLAY_SINGLE: [(PLAY_QUARTET, 4), (PLAY_DOUBLE_SEQUENCE, 6)],
    PLAY_PAIR: [(PLAY_QUARTET, 4), (PLAY_DOUBLE_SEQUENCE, 8)],
    PLAY_TRIPLET: [(PLAY_DOUBLE_SEQUENCE, 10)],
    PLAY_QUARTET: [],
}

# Game phases
PHASE_WAITING = 'waiting'
PHASE_ACTIVE = 'active'
PHASE_AWAITING_READY = 'awaiting_ready'

HAND_SIZE = 13
MIN_PLAYERS = 2
MAX_PLAYERS = 4
