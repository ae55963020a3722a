# SPDX-License-Identifier: GPL-3.0-or-later

import random

# Pastel card backgrounds; a note keeps the one it was created with
CARD_COLORS = [
    '#FFD6A5',  # apricot
    '#FDFFB6',  # lemon
    '#CAFFBF',  # mint
    '#9BF6FF',  # sky
    '#A0C4FF',  # periwinkle
    '#BDB2FF',  # lavender
    '#FFC6FF',  # orchid
    '#FFADAD',  # coral
]


def random_card_color() -> str:
    return random.choice(CARD_COLORS)
