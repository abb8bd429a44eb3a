#!/usr/bin/env python3
"""
Publishes rendered example pages to the documentation site.

A page is the rendered figure (an HTML file) prefixed with a front-matter block.
It is always written under the local site directory; when DOCS_PUBLISH_URL is
configured it is also pushed to the remote site, retrying on rate limits and
server errors with exponential backoff.
"""
import argparse
import logging
import os
import random
import sys
import textwrap
import time

import requests

import config
from front_matter import FrontMatter, render_front_matter

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


class PublishError(RuntimeError):
    """Raised when a page could not be pushed to the remote site."""


def render_page(meta, body: str, description: str = None) -> str:
    page = render_front_matter(meta)
    if description:
        page += "\n" + textwrap.dedent(description).strip() + "\n"
    return page + "\n" + body


def write_page(page: str, destination: str, output_dir: str = None, filename: str = "index.html") -> str:
    """Writes the page to <output_dir>/<destination>/<filename> and returns the path."""
    output_dir = output_dir or config.OUTPUT_DIR
    dest_folder = os.path.join(output_dir, destination.strip("/"))
    os.makedirs(dest_folder, exist_ok=True)

    path = os.path.join(dest_folder, filename)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(page)
    logging.info(f"Page written to {path}")
    return path


def push_page(page: str, destination: str, url: str = None, max_retries: int = None) -> requests.Response:
    """
    POSTs the page to the remote site.
    Connection errors, timeouts and 429/5xx responses are retried; any other
    error status fails immediately.
    """
    url = url or config.PUBLISH_URL
    max_retries = config.MAX_RETRIES if max_retries is None else max_retries
    auth = None
    if config.PUBLISH_USERNAME and config.PUBLISH_API_KEY:
        auth = (config.PUBLISH_USERNAME, config.PUBLISH_API_KEY)

    payload = {"destination": destination.strip("/"), "content": page}
    last_error = None

    for attempt in range(max_retries):
        logging.info(f"Publishing '{destination}' to {url} (attempt {attempt + 1}/{max_retries})")
        try:
            response = requests.post(url, json=payload, auth=auth, timeout=config.REQUEST_TIMEOUT)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logging.warning(f"Connection problem while publishing '{destination}': {e}")
            last_error = e
        else:
            if response.ok:
                logging.info(f"SUCCESS: '{destination}' published ({response.status_code}).")
                return response
            if response.status_code not in RETRYABLE_STATUS:
                logging.error(f"Publishing '{destination}' rejected: {response.status_code} - {response.text}")
                raise PublishError(f"Publish rejected with status {response.status_code}: {response.text}")
            logging.warning(f"Retryable status {response.status_code} for '{destination}'.")
            last_error = PublishError(f"status {response.status_code}")

        if attempt < max_retries - 1:
            backoff_time = min(config.INITIAL_BACKOFF_SECONDS * (2 ** attempt), config.MAX_BACKOFF_SECONDS)
            wait_time = backoff_time + random.uniform(0, 1)
            logging.warning(f"Waiting {wait_time:.2f} seconds before retrying.")
            time.sleep(wait_time)

    logging.critical(f"All {max_retries} publish attempts failed for '{destination}'.")
    raise PublishError(f"Exhausted {max_retries} attempts publishing '{destination}'") from last_error


def publish(notebook: str, destination: str, title: str, description: str,
            output_dir: str = None, url: str = None, remote: bool = True, **meta) -> dict:
    """
    Publishes a rendered notebook or example page.

    Args:
        notebook (str): Path to the rendered HTML body.
        destination (str): Path of the page on the site, e.g. 'scikit-learn/plot-sparse-coding/'.
        title (str): Page title.
        description (str): Short description, written after the front matter.
        remote (bool): Set to False to only write the local copy.
        **meta: Remaining front-matter fields (name, thumbnail, order, language, ...).

    Returns:
        dict: status, local_path, remote_status and url of the published page.
    """
    with open(notebook, 'r', encoding='utf-8') as f:
        body = f.read()

    meta.setdefault('name', title)
    meta.setdefault('permalink', destination)
    front = FrontMatter(title=title, **meta)
    page = render_page(front, body, description)
    local_path = write_page(page, destination, output_dir=output_dir)

    result = {"status": "written", "local_path": local_path, "remote_status": None, "url": None}

    url = url or config.PUBLISH_URL
    if not remote:
        return result
    if not url:
        logging.info("DOCS_PUBLISH_URL not configured; skipping remote publish.")
        return result

    response = push_page(page, destination, url=url)
    result.update({
        "status": "published",
        "remote_status": response.status_code,
        "url": url.rstrip('/') + '/' + destination.strip('/'),
    })
    return result


def main():
    parser = argparse.ArgumentParser(description="Publish a rendered page to the documentation site.")
    parser.add_argument("notebook", type=str, help="Rendered HTML file.")
    parser.add_argument("destination", type=str, help="Destination path on the site.")
    parser.add_argument("--title", required=True)
    parser.add_argument("--description", default="")
    parser.add_argument("--language", default="python")
    parser.add_argument("--suite", default="examples")
    parser.add_argument("--order", type=int, default=1)
    parser.add_argument("--thumbnail", default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format=config.LOG_FORMAT)

    try:
        result = publish(
            args.notebook, args.destination, args.title, args.description,
            language=args.language, suite=args.suite, order=args.order,
            thumbnail=args.thumbnail, has_thumbnail=bool(args.thumbnail),
        )
    except FileNotFoundError:
        print(f"Error: The file '{args.notebook}' was not found.", file=sys.stderr)
        sys.exit(1)
    except PublishError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"{result['status']}: {result['local_path']}")


if __name__ == "__main__":
    main()
