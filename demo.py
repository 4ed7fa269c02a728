"""
Hybrid Hash Map Demo -- Fill profile, growth and rehash points, degenerate
hashing with chain fallback, and lookup timing against the builtin dict.

Generates:
- viz/*.png -- Individual visualization files
- report.pdf -- Comprehensive PDF report
"""

import sys
import time
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))
from hybrid_hash_map import HybridHashMap

SEED = 42
np.random.seed(SEED)

VIZ_DIR = Path(__file__).parent / "viz"
VIZ_DIR.mkdir(exist_ok=True)

COLORS = {
    "blue": "#3498db",
    "red": "#e74c3c",
    "orange": "#f39c12",
    "green": "#27ae60",
    "purple": "#9b59b6",
    "dark": "#2c3e50",
}


def placement_split(m):
    """(entries at a bucket front, entries chained behind a front)."""
    lengths = np.array(m.chain_lengths())
    fronts = int(np.count_nonzero(lengths))
    return fronts, int(lengths.sum()) - fronts


# ---------------------------------------------------------------------------
# Example 1: Fill Profile
# ---------------------------------------------------------------------------
def example_1_fill_profile():
    """Track load factor and placement kind while random keys go in."""
    print("=" * 60)
    print("Example 1: Fill Profile")
    print("=" * 60)

    keys = np.random.permutation(1_000_000)[:3000]
    m = HybridHashMap()
    load, chained_share = [], []

    for key in keys:
        m.insert(int(key), None)
        _, chained = placement_split(m)
        load.append(m.load_factor())
        chained_share.append(chained / m.size())

    lengths = np.array(m.chain_lengths())
    histogram = np.bincount(lengths)
    fronts, chained = placement_split(m)
    print(f"  Inserted {m.size()} keys, capacity {m.capacity()}")
    print(f"  Front entries: {fronts}, chained entries: {chained}")
    print(f"  Chain length histogram: {histogram.tolist()}")

    fig, axes = plt.subplots(1, 3, figsize=(18, 5))
    x = np.arange(1, len(keys) + 1)

    axes[0].plot(x, load, color=COLORS["blue"], linewidth=1)
    axes[0].axhline(HybridHashMap.LOAD_FACTOR, color=COLORS["red"], linestyle="--",
                    label=f"threshold {HybridHashMap.LOAD_FACTOR}")
    axes[0].set_xlabel("Keys inserted")
    axes[0].set_ylabel("size / capacity")
    axes[0].set_title("Load factor (sawtooth = rehash)", fontweight="bold")
    axes[0].legend(fontsize=9)
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(x, np.array(chained_share) * 100, color=COLORS["orange"], linewidth=1)
    axes[1].set_xlabel("Keys inserted")
    axes[1].set_ylabel("% of entries")
    axes[1].set_title("Entries reached only through home chain", fontweight="bold")
    axes[1].grid(True, alpha=0.3)

    axes[2].bar(np.arange(len(histogram)), histogram, color=COLORS["green"], edgecolor="white")
    axes[2].set_xlabel("Chain length")
    axes[2].set_ylabel("Buckets")
    axes[2].set_title(f"Chain lengths at capacity {m.capacity()}", fontweight="bold")
    axes[2].grid(True, alpha=0.3, axis="y")

    fig.suptitle("Neighborhood placement keeps chains short",
                 fontsize=14, fontweight="bold", y=1.02)
    fig.tight_layout()
    fig.savefig(VIZ_DIR / "01_fill_profile.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"\n  Saved: viz/01_fill_profile.png")


# ---------------------------------------------------------------------------
# Example 2: Growth and Rehash Points
# ---------------------------------------------------------------------------
def example_2_growth():
    """Capacity only doubles; each step is one full rehash."""
    print("\n" + "=" * 60)
    print("Example 2: Growth and Rehash Points")
    print("=" * 60)

    n = 5000
    m = HybridHashMap()
    capacities = np.zeros(n, dtype=np.int64)
    insert_ns = np.zeros(n, dtype=np.float64)
    rehash_at = []

    for i in range(n):
        before = m.capacity()
        start = time.perf_counter()
        m.insert(i, i)
        insert_ns[i] = (time.perf_counter() - start) * 1e9
        capacities[i] = m.capacity()
        if m.capacity() != before:
            rehash_at.append(i)
            print(f"  Rehash on insert #{i + 1}: capacity {before} -> {m.capacity()}")

    missing = [i for i in range(n) if m.get(i) != i]
    assert not missing, f"lost keys after rehash: {missing[:10]}"
    print(f"\n  All {n} keys retrievable after {len(rehash_at)} rehashes")

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    axes[0].step(np.arange(1, n + 1), capacities, where="post", color=COLORS["purple"])
    axes[0].plot(np.arange(1, n + 1), np.arange(1, n + 1) / HybridHashMap.LOAD_FACTOR,
                 color=COLORS["dark"], linestyle=":", label="size / threshold")
    axes[0].set_xlabel("Keys inserted")
    axes[0].set_ylabel("Capacity")
    axes[0].set_title("Capacity doubling", fontweight="bold")
    axes[0].legend(fontsize=9)
    axes[0].grid(True, alpha=0.3)

    axes[1].semilogy(np.arange(1, n + 1), insert_ns, color=COLORS["blue"], linewidth=0.5)
    for i in rehash_at:
        axes[1].axvline(i + 1, color=COLORS["red"], alpha=0.3)
    axes[1].set_xlabel("Keys inserted")
    axes[1].set_ylabel("Insert time (ns, log)")
    axes[1].set_title("Rehash spikes amortize away", fontweight="bold")
    axes[1].grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(VIZ_DIR / "02_growth.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"\n  Saved: viz/02_growth.png")


# ---------------------------------------------------------------------------
# Example 3: Degenerate Hash
# ---------------------------------------------------------------------------
def example_3_degenerate_hash():
    """Four home buckets for every key: neighborhoods fill, chains absorb the rest."""
    print("\n" + "=" * 60)
    print("Example 3: Degenerate Hash")
    print("=" * 60)

    m = HybridHashMap(hash_func=lambda key: (key % 4) * 10)
    for i in range(200):
        m.insert(i, i)
    for i in range(0, 200, 7):
        m.erase(i)

    expected = {i: i for i in range(200) if i % 7}
    assert dict(m.items()) == expected, "degenerate hash lost entries"
    lengths = np.array(m.chain_lengths())
    fronts, chained = placement_split(m)
    print(f"  Size {m.size()}, capacity {m.capacity()}")
    print(f"  Front entries: {fronts}, chained entries: {chained}")
    print(f"  Longest chain: {lengths.max()}")

    fig, ax = plt.subplots(figsize=(14, 5))
    occupied = np.nonzero(lengths)[0]
    ax.bar(occupied, lengths[occupied], color=COLORS["red"], edgecolor="white")
    ax.set_xlabel("Bucket index")
    ax.set_ylabel("Chain length")
    ax.set_title(f"All keys hash to 4 homes: {fronts} front, {chained} chained",
                 fontweight="bold")
    ax.grid(True, alpha=0.3, axis="y")
    fig.tight_layout()
    fig.savefig(VIZ_DIR / "03_degenerate_hash.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"\n  Saved: viz/03_degenerate_hash.png")


# ---------------------------------------------------------------------------
# Example 4: Lookup Timing
# ---------------------------------------------------------------------------
def example_4_lookup_timing():
    """Average lookup cost stays flat as the map grows."""
    print("\n" + "=" * 60)
    print("Example 4: Lookup Timing vs dict")
    print("=" * 60)

    sizes = [1_000, 4_000, 16_000, 64_000]
    ours, builtin = [], []

    for n in sizes:
        keys = [int(k) for k in np.random.permutation(n * 10)[:n]]
        m = HybridHashMap((k, k) for k in keys)
        d = {k: k for k in keys}
        probe = [keys[int(i)] for i in np.random.randint(0, n, size=20_000)]

        start = time.perf_counter()
        for k in probe:
            m.at(k)
        ours.append((time.perf_counter() - start) / len(probe) * 1e9)

        start = time.perf_counter()
        for k in probe:
            d[k]
        builtin.append((time.perf_counter() - start) / len(probe) * 1e9)
        print(f"  n={n:>6}: HybridHashMap {ours[-1]:8.1f} ns, dict {builtin[-1]:6.1f} ns")

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(sizes, ours, "o-", color=COLORS["blue"], label="HybridHashMap.at")
    ax.plot(sizes, builtin, "s-", color=COLORS["green"], label="dict[key]")
    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("Entries")
    ax.set_ylabel("ns per lookup")
    ax.set_title("Lookup cost is independent of size", fontweight="bold")
    ax.legend()
    ax.grid(True, alpha=0.3, which="both")
    fig.tight_layout()
    fig.savefig(VIZ_DIR / "04_lookup_timing.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"\n  Saved: viz/04_lookup_timing.png")


# ---------------------------------------------------------------------------
# PDF Report
# ---------------------------------------------------------------------------
def generate_pdf_report():
    print("\n" + "=" * 60)
    print("Generating PDF Report")
    print("=" * 60)

    report_path = Path(__file__).parent / "report.pdf"
    viz_files = sorted(VIZ_DIR.glob("*.png"))

    with PdfPages(str(report_path)) as pdf:
        fig, ax = plt.subplots(figsize=(11, 8.5))
        ax.axis("off")
        ax.text(0.5, 0.78, "Hybrid Hash Map", fontsize=24, fontweight="bold",
                ha="center", va="center", transform=ax.transAxes)
        ax.text(0.5, 0.68, "Neighborhood Placement with Chain Fallback",
                fontsize=13, ha="center", va="center", transform=ax.transAxes, color="gray")
        info_text = (
            f"Neighborhood width: {HybridHashMap.NEIGHBORHOOD}\n"
            f"Initial capacity: {HybridHashMap.INITIAL_CAPACITY}\n"
            f"Load factor threshold: {HybridHashMap.LOAD_FACTOR}\n\n"
            "This demo covers:\n"
            "  1. Fill profile: load factor, chained share, chain lengths\n"
            "  2. Growth: capacity doubling and rehash cost\n"
            "  3. Degenerate hash: neighborhood fill plus chaining\n"
            "  4. Lookup timing against the builtin dict\n\n"
            f"Random seed: {SEED}"
        )
        ax.text(0.5, 0.32, info_text, fontsize=11, ha="center", va="center",
                transform=ax.transAxes, linespacing=1.6)
        pdf.savefig(fig)
        plt.close(fig)

        titles = {
            "01_fill_profile.png": "Example 1: Fill Profile",
            "02_growth.png": "Example 2: Growth and Rehash Points",
            "03_degenerate_hash.png": "Example 3: Degenerate Hash",
            "04_lookup_timing.png": "Example 4: Lookup Timing",
        }

        for viz_file in viz_files:
            fig = plt.figure(figsize=(11, 8.5))
            title = titles.get(viz_file.name, viz_file.stem.replace("_", " ").title())
            fig.suptitle(title, fontsize=14, fontweight="bold", y=0.98)
            img = plt.imread(str(viz_file))
            ax = fig.add_axes([0.02, 0.02, 0.96, 0.92])
            ax.imshow(img)
            ax.axis("off")
            pdf.savefig(fig)
            plt.close(fig)

    print(f"  Report saved: report.pdf ({len(viz_files) + 1} pages)")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main():
    print("Hybrid Hash Map Demo")
    print("=" * 60)
    print(f"Seed: {SEED}")
    print()

    example_1_fill_profile()
    example_2_growth()
    example_3_degenerate_hash()
    example_4_lookup_timing()
    generate_pdf_report()

    print("\n" + "=" * 60)
    print("All examples completed successfully.")
    print(f"Visualizations: {VIZ_DIR}/")
    print(f"Report: {Path(__file__).parent / 'report.pdf'}")
    print("=" * 60)


if __name__ == "__main__":
    main()
