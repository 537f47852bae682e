"""Ranking helpers for series of averages."""

import numpy as np
import pandas as pd


def rank(scores: pd.Series) -> pd.Series:
    """The rank of each student according to score.

    Higher scores rank first. Students with equal scores are ranked in the
    order they appear in `scores`. Missing scores are left out.

    Parameters
    ----------
    scores : pd.Series
        A series of averages.

    Returns
    -------
    pd.Series
        The integer rank of each student, sorted by rank and named "rank".

    Example
    -------

    >>> rank(pd.Series([7.0, 9.5, 7.0], index=["a", "b", "c"])).to_dict()
    {'b': 1, 'a': 2, 'c': 3}

    """
    table = pd.DataFrame(
        {"score": scores.astype(float), "position": np.arange(len(scores))},
        index=scores.index,
    ).dropna(subset=["score"])
    table = table.sort_values(["score", "position"], ascending=[False, True])
    table["rank"] = np.arange(1, len(table) + 1)
    return table["rank"]


def percentile(scores: pd.Series) -> pd.Series:
    """The percentile of each student according to score.

    Parameters
    ----------
    scores : pd.Series
        The scores used to compute the percentile.

    Returns
    -------
    pd.Series
        A Series in which each entry is the student's percentile in the
        class, as a number between 0 and 1. The top student is at 1.

    """
    ranks = rank(scores)
    s = 1 - ((ranks - 1) / len(ranks))
    s.name = "percentile"
    return s
