#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Network id allocation for netd VPN networks.
"""
import os
import random
import time
from typing import Optional

MIN_NETWORK_ID = 4096
NETWORK_ID_MASK = 0xFFFE


class NetworkIdAllocator:
    """Picks an even network id in [4096, 65534].

    Seeded once from wall-clock time and pid; this is not real randomness and
    no check is made against networks already bound on the host.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random(int(time.time()) ^ os.getpid())

    def allocate(self) -> int:
        network_id = 0
        while network_id < MIN_NETWORK_ID:
            network_id = self.rng.getrandbits(31) & NETWORK_ID_MASK
        return network_id
