#!/usr/bin/env python3
"""
Summarize simulation rows written by `entrate-sims --out_csv`.

Prints, per case and length, the mean estimate of each estimator next to the
true entropy rate, and its absolute bias.
"""

import argparse
import sys

import pandas as pd


def load_csv_safe(path):
    """Load CSV if it exists, return empty DataFrame if not."""
    try:
        return pd.read_csv(path)
    except FileNotFoundError:
        print(f"Warning: {path} not found, skipping...")
        return pd.DataFrame()


def summarize(df):
    df = df.copy()
    df["bias"] = (df["mean"] - df["true_entropy"]).abs()
    table = df.pivot_table(
        index=["case", "n"],
        columns="estimator",
        values=["mean", "bias"],
        aggfunc="mean",
    )
    truth = df.groupby(["case", "n"])["true_entropy"].first()
    return table, truth


def main():
    ap = argparse.ArgumentParser(description="Summarize entropy rate simulation CSV")
    ap.add_argument("csv", nargs="?", default="results/sims.csv")
    args = ap.parse_args()

    df = load_csv_safe(args.csv)
    if df.empty:
        sys.exit(1)
    table, truth = summarize(df)
    for (case, n), row in table.iterrows():
        means = "  ".join(f"{est}={row[('mean', est)]:.4f}" for est in table["mean"].columns)
        print(f"{case:24s} n={n:<6d} true={truth[(case, n)]:.4f}  {means}")


if __name__ == "__main__":
    main()
