"""Small synthetic cadnano designs for the tests."""
import json

NONE = [-1, -1, -1, -1]


def vstrand(num, length, row=0, col=0):
    return {
        'num': num,
        'row': row,
        'col': col,
        'scaf': [list(NONE) for _ in range(length)],
        'stap': [list(NONE) for _ in range(length)],
        'skip': [0] * length,
        'loop': [0] * length,
        'stap_colors': [],
        'scafLoop': [],
        'stapLoop': [],
    }


def _lane(vs, lane):
    return vs['scaf'] if lane == 0 else vs['stap']


def fill(vs, lane, lo, hi):
    """Lay a continuous strand over positions lo..hi of one lane.

    The strand runs the way the lane runs on this helix.
    """
    squares = _lane(vs, lane)
    num = vs['num']
    forward = (num % 2 + lane) % 2 == 0
    for p in range(lo, hi + 1):
        sq = list(NONE)
        before = p - 1 if forward else p + 1
        after = p + 1 if forward else p - 1
        if lo <= before <= hi:
            sq[0:2] = [num, before]
        if lo <= after <= hi:
            sq[2:4] = [num, after]
        squares[p] = sq


def connect(src, src_pos, dst, dst_pos, lane=0):
    """Crossover from the 3' end at src_pos to the 5' end at dst_pos."""
    _lane(src, lane)[src_pos][2:4] = [dst['num'], dst_pos]
    _lane(dst, lane)[dst_pos][0:2] = [src['num'], src_pos]


def dump(*vstrands):
    return json.dumps({'name': 'test', 'vstrands': list(vstrands)})


def full_helix(num=0, length=32, row=0, col=0):
    vs = vstrand(num, length, row, col)
    fill(vs, 0, 0, length - 1)
    fill(vs, 1, 0, length - 1)
    return vs


def single_helix(length=32, num=0, skip=(), loop=()):
    """One fully paired helix; skip/loop are (position, value) pairs."""
    vs = full_helix(num, length)
    for pos, val in skip:
        vs['skip'][pos] = val
    for pos, val in loop:
        vs['loop'][pos] = val
    return dump(vs)


def two_helix(length=32, circular=False):
    """Scaffold running up helix 0 and back down helix 1.

    Each helix keeps its own staple. With circular=True the scaffold also
    crosses back from helix 1 to helix 0 at position 0.
    """
    h0 = full_helix(0, length, col=0)
    h1 = full_helix(1, length, col=1)
    connect(h0, length - 1, h1, length - 1)
    if circular:
        connect(h1, 0, h0, 0)
    return dump(h0, h1)


def nicked_staple(length=32, nick=16):
    """One helix whose staple is broken between nick - 1 and nick."""
    vs = vstrand(0, length)
    fill(vs, 0, 0, length - 1)
    fill(vs, 1, nick, length - 1)
    fill(vs, 1, 0, nick - 1)
    return vs
