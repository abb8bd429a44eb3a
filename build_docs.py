#!/usr/bin/env python3
"""
Master build script for the documentation examples.
Renders every registered example, writes its page with front matter under the
site directory and records the result in a JSONL manifest.
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime, timezone

import config
import geo_points
import sparse_coding
from descriptions import DESCRIPTIONS
from front_matter import FrontMatter, check_front_matter
from publisher import PublishError, publish


def build_scatter_geo_figure(dest_folder: str):
    df = geo_points.load_points()
    evidence = geo_points.check_points(df)
    logging.info(f"Point table lint: {evidence}")
    return geo_points.create_scatter_geo_figure(df)


def build_sparse_coding_figure(dest_folder: str):
    signal = sparse_coding.generate_signal()
    results = sparse_coding.run_sparse_coding(signal)

    thumb_dir = os.path.join(dest_folder, "thumbnail")
    os.makedirs(thumb_dir, exist_ok=True)
    sparse_coding.save_thumbnail(results, signal, os.path.join(thumb_dir, "sparse-coding.png"))
    return sparse_coding.create_sparse_coding_figure(results, signal)


# --- Example Registry ---
EXAMPLES = {
    "scatter-geo-text": {
        "builder": build_scatter_geo_figure,
        "destination": "python/scatter-geo-text/",
        "title": "Text and Markers on Maps",
        "front_matter": dict(
            name="Text and Markers on Maps",
            plot_url="scatter-geo-text.html",
            language="python",
            suite="scatter-geo",
            order=3,
            sitemap=False,
            arrangement="horizontal",
        ),
    },
    "sparse-coding": {
        "builder": build_sparse_coding_figure,
        "destination": "scikit-learn/plot-sparse-coding/",
        "title": "Sparse Coding | plotly",
        "front_matter": dict(
            name="Sparse Coding",
            plot_url="sparse-coding.html",
            language="scikit-learn",
            suite="linear_models",
            order=6,
            sitemap=False,
            has_thumbnail=True,
            thumbnail="thumbnail/sparse-coding.png",
            page_type="example_index",
            display_as="linear_models",
        ),
    },
}


def load_built_pages(manifest_path: str) -> set:
    """Loads the set of example slugs already built successfully."""
    if not os.path.exists(manifest_path):
        return set()

    built = set()
    with open(manifest_path, 'r', encoding='utf-8') as f:
        for line in f:
            try:
                data = json.loads(line)
                if data['status'] != 'error':
                    built.add(data['slug'])
            except (json.JSONDecodeError, KeyError):
                continue
    return built


def drop_manifest_records(manifest_path: str, slugs) -> None:
    """Removes the records of the given slugs; other examples' records are kept."""
    if not os.path.exists(manifest_path):
        return

    slugs = set(slugs)
    with open(manifest_path, 'r', encoding='utf-8') as f:
        lines = f.readlines()

    kept = []
    for line in lines:
        try:
            if json.loads(line).get('slug') in slugs:
                continue
        except (json.JSONDecodeError, AttributeError):
            pass  # unreadable lines are left for load_built_pages to skip
        kept.append(line)

    with open(manifest_path, 'w', encoding='utf-8') as f:
        f.writelines(kept)


def build_example(slug: str, output_dir: str, remote: bool = False) -> dict:
    """
    Renders a single example and writes (optionally publishes) its page.
    Any failure is logged and returned as an error record so the rest of the
    batch keeps going.
    """
    logging.info(f"--- Building example: {slug} ---")
    example = EXAMPLES[slug]
    destination = example["destination"]
    meta = dict(example["front_matter"])

    record = {
        "slug": slug,
        "destination": destination,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        problems = check_front_matter(FrontMatter(title=example["title"], **meta))
        if problems:
            logging.warning(f"Front matter problems for '{slug}': {problems}")
        record["lint"] = problems

        dest_folder = os.path.join(output_dir, destination.strip("/"))
        os.makedirs(dest_folder, exist_ok=True)

        fig = example["builder"](dest_folder)

        # Standalone figure referenced by plot_url, and the fragment embedded in the page
        figure_path = os.path.join(dest_folder, meta["plot_url"])
        fig.write_html(figure_path, include_plotlyjs='cdn')
        fragment_path = os.path.join(dest_folder, f"{slug}.fragment.html")
        with open(fragment_path, 'w', encoding='utf-8') as f:
            f.write(fig.to_html(full_html=False, include_plotlyjs='cdn'))

        result = publish(
            fragment_path, destination, example["title"], DESCRIPTIONS.get(slug, ""),
            output_dir=output_dir, remote=remote, **meta
        )
        record.update(result)
        record["figure_path"] = figure_path
        logging.info(f"Example '{slug}' done: {result['status']}")

    except PublishError as e:
        logging.error(f"Publishing failed for '{slug}': {e}")
        record.update({"status": "error", "reason": f"Publish failed: {e}"})
    except Exception as e:
        logging.error(f"Critical exception while building '{slug}': {e}", exc_info=True)
        record.update({"status": "error", "reason": str(e)})

    return record


def main(argv=None):
    """
    Main function to build every example page.
    """
    parser = argparse.ArgumentParser(description="Build the documentation example pages.")
    parser.add_argument(
        '--force',
        action='store_true',
        help='Rebuild every example, even if it is already in the manifest.'
    )
    parser.add_argument(
        '--only',
        action='append',
        choices=sorted(EXAMPLES),
        help='Build only the given example (repeatable).'
    )
    parser.add_argument(
        '--publish',
        action='store_true',
        help='Also push the pages to DOCS_PUBLISH_URL.'
    )
    parser.add_argument('--output-dir', default=config.OUTPUT_DIR, help='Site directory.')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format=config.LOG_FORMAT)

    os.makedirs(args.output_dir, exist_ok=True)
    manifest_path = os.path.join(args.output_dir, config.MANIFEST_FILE)

    slugs = args.only or list(EXAMPLES)
    print(f"Found {len(slugs)} examples to build: {slugs}")

    built = set()
    if not args.force:
        built = load_built_pages(manifest_path)
        print(f"Found {len(built)} already built examples. Will skip them.")
    else:
        print(f"Force rebuild is enabled. {slugs} will be built again.")
        drop_manifest_records(manifest_path, slugs)

    failures = 0
    with open(manifest_path, 'a', encoding='utf-8') as f_out:
        for i, slug in enumerate(slugs):
            if slug in built:
                print(f"({i+1}/{len(slugs)}) Skipping already built example: {slug}")
                continue

            record = build_example(slug, args.output_dir, remote=args.publish)
            if record["status"] == "error":
                failures += 1

            f_out.write(json.dumps(record, ensure_ascii=False) + '\n')
            f_out.flush()

    print("\n" + "*"*80)
    print(f"Build finished with {failures} failure(s).")
    print(f"Build records have been saved to '{manifest_path}'.")
    print("*"*80)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
