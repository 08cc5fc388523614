import logging

logger = logging.getLogger("baghmate.search")


def format_score(score, decisive):
    """Forced results render as ``win``/``loss`` with the raw magnitude."""
    if abs(score) >= decisive:
        return f"{'win' if score > 0 else 'loss'} {int(abs(score))}"
    return f"cp {score:.1f}"


def log_info(d, score, nodes, elapsed, pv_moves, decisive):
    pv_str = " ".join(str(m) for m in pv_moves)
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    score_str = format_score(score, decisive)
    logger.info(f"info depth {d} score {score_str} nodes {nodes} nps {nps} time {int(elapsed * 1000)} pv {pv_str}")
