#!/usr/bin/env python3
"""
Sparse coding of a piecewise constant signal against Ricker wavelet dictionaries.

The signal is approximated as a sparse combination of Ricker (Mexican hat)
wavelets using scikit-learn's SparseCoder. Two dictionaries are compared: one
with atoms of a single width and one mixing several widths. The multi-width
dictionary captures the sharp edges of the signal far better.

Each transform algorithm (orthogonal matching pursuit, Lasso by coordinate
descent, soft thresholding with least-squares debiasing) is run against both
dictionaries and the reconstructions are plotted next to the original signal.
"""
import argparse
import logging
import warnings

import numpy as np
import matplotlib.pyplot as plt
import plotly.graph_objects as go
import plotly.subplots as sp
from sklearn.decomposition import SparseCoder

# --- Configuration ---
RESOLUTION = 1024
SUBSAMPLING = 3  # subsampling factor
WIDTH = 100
N_COMPONENTS = RESOLUTION // SUBSAMPLING
MULTI_WIDTHS = (10, 50, 100, 500, 1000)

# transform_algorithm -> the single parameter it takes
TRANSFORM_ALGORITHMS = {
    'omp': 'transform_n_nonzero_coefs',
    'lasso_cd': 'transform_alpha',
    'threshold': 'transform_alpha',
}

# (title, transform_algorithm, transform_alpha, transform_n_nonzero_coefs, color)
ESTIMATORS = [
    ('OMP', 'omp', None, 15, 'navy'),
    ('Lasso', 'lasso_cd', 2, None, 'turquoise'),
]
THRESHOLD_ALPHA = 20
THRESHOLD_COLOR = 'darkorange'

DICTIONARY_TITLES = {
    'fixed': 'Sparse coding against fixed width dictionary',
    'multi': 'Sparse coding against multiple widths dictionary',
}


def ricker_function(resolution, center, width):
    """Discrete sub-sampled Ricker (Mexican hat) wavelet"""
    x = np.linspace(0, resolution - 1, resolution)
    x = ((2 / (np.sqrt(3 * width) * np.pi ** 0.25))
         * (1 - ((x - center) ** 2 / width ** 2))
         * np.exp((-(x - center) ** 2) / (2 * width ** 2)))
    return x


def ricker_matrix(width, resolution, n_components):
    """Dictionary of Ricker (Mexican hat) wavelets, one unit-norm atom per row"""
    centers = np.linspace(0, resolution - 1, n_components)
    D = np.empty((n_components, resolution))
    for i, center in enumerate(centers):
        D[i] = ricker_function(resolution, center, width)
    D /= np.sqrt(np.sum(D ** 2, axis=1))[:, np.newaxis]
    return D


def build_dictionaries(resolution=RESOLUTION, n_components=N_COMPONENTS,
                       width=WIDTH, widths=MULTI_WIDTHS) -> dict:
    """
    Returns the fixed width dictionary and the multi-width one.
    The multi-width dictionary holds n_components // 5 atoms for each width.
    """
    D_fixed = ricker_matrix(width=width, resolution=resolution, n_components=n_components)
    D_multi = np.r_[tuple(ricker_matrix(width=w, resolution=resolution,
                                        n_components=n_components // 5)
                          for w in widths)]
    return {'fixed': D_fixed, 'multi': D_multi}


def generate_signal(resolution=RESOLUTION):
    y = np.linspace(0, resolution - 1, resolution)
    first_quarter = y < resolution / 4
    y[first_quarter] = 3.
    y[np.logical_not(first_quarter)] = -1.
    return y


def _log_solver_warnings(caught, algorithm):
    for w in caught:
        logging.warning(f"{algorithm}: {w.category.__name__}: {w.message}")


def sparse_encode_signal(dictionary, signal, algorithm, alpha=None, n_nonzero=None, max_iter=1000) -> dict:
    """
    Encodes a single signal with SparseCoder and reconstructs it from the code.

    Args:
        dictionary: (n_components, n_features) array of atoms.
        signal: (n_features,) array.
        algorithm: one of 'omp', 'lasso_cd', 'threshold'.
        alpha: penalty weight (lasso_cd, threshold).
        n_nonzero: sparsity target (omp).
        max_iter: iteration cap for lasso_cd.
    """
    if algorithm not in TRANSFORM_ALGORITHMS:
        raise ValueError(f"Unknown transform algorithm '{algorithm}'. "
                         f"Expected one of {sorted(TRANSFORM_ALGORITHMS)}.")

    coder = SparseCoder(dictionary=dictionary, transform_n_nonzero_coefs=n_nonzero,
                        transform_alpha=alpha, transform_algorithm=algorithm,
                        transform_max_iter=max_iter)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter('always')
        x = coder.transform(signal.reshape(1, -1))
    _log_solver_warnings(caught, algorithm)

    density = len(np.flatnonzero(x))
    reconstruction = np.ravel(np.dot(x, dictionary))
    squared_error = np.sum((signal - reconstruction) ** 2)
    return {
        'algorithm': algorithm,
        'coefficients': x,
        'reconstruction': reconstruction,
        'density': density,
        'squared_error': float(squared_error),
    }


def threshold_with_debiasing(dictionary, signal, alpha=THRESHOLD_ALPHA) -> dict:
    """Soft thresholding, then a least-squares refit on the atoms it kept."""
    result = sparse_encode_signal(dictionary, signal, 'threshold', alpha=alpha)
    x = result['coefficients']
    _, idx = np.where(x != 0)
    if len(idx):
        x[0, idx], _, _, _ = np.linalg.lstsq(dictionary[idx, :].T, signal, rcond=None)
    else:
        logging.warning(f"Thresholding at alpha={alpha} removed every atom; nothing to debias.")

    reconstruction = np.ravel(np.dot(x, dictionary))
    result.update({
        'coefficients': x,
        'reconstruction': reconstruction,
        'density': len(idx),
        'squared_error': float(np.sum((signal - reconstruction) ** 2)),
    })
    return result


def run_sparse_coding(signal=None, dictionaries=None, estimators=ESTIMATORS,
                      threshold_alpha=THRESHOLD_ALPHA) -> list:
    """
    Runs every estimator plus thresholding against every dictionary.
    Each result is tagged with its dictionary key, legend label and color.
    """
    if signal is None:
        signal = generate_signal()
    if dictionaries is None:
        dictionaries = build_dictionaries(resolution=len(signal))

    results = []
    for key, D in dictionaries.items():
        logging.info(f"Sparse coding against '{key}' dictionary {D.shape}")
        for title, algo, alpha, n_nonzero, color in estimators:
            res = sparse_encode_signal(D, signal, algo, alpha=alpha, n_nonzero=n_nonzero)
            res.update({
                'dictionary': key,
                'color': color,
                'label': f"{title}: {res['density']} nonzero coefs,\n{res['squared_error']:.2f} error",
            })
            results.append(res)

        res = threshold_with_debiasing(D, signal, alpha=threshold_alpha)
        res.update({
            'dictionary': key,
            'color': THRESHOLD_COLOR,
            'label': (f"Thresholding w/ debiasing:\n{res['density']} nonzero coefs, "
                      f"{res['squared_error']:.2f} error"),
        })
        results.append(res)
    return results


def create_sparse_coding_figure(results, signal) -> go.Figure:
    keys = list(dict.fromkeys(r['dictionary'] for r in results))
    titles = [DICTIONARY_TITLES.get(k, k) for k in keys]

    fig = sp.make_subplots(rows=1, cols=len(keys), subplot_titles=titles)

    for col, key in enumerate(keys, start=1):
        fig.add_trace(go.Scatter(
            y=signal,
            mode='lines',
            line=dict(color='black', width=2),
            name='Original signal',
            showlegend=(col == 1),
        ), row=1, col=col)

        for res in (r for r in results if r['dictionary'] == key):
            fig.add_trace(go.Scatter(
                y=res['reconstruction'],
                mode='lines',
                line=dict(color=res['color'], width=2),
                # plotly legends wrap on <br>, not newlines
                name=res['label'].replace('\n', '<br>'),
            ), row=1, col=col)

    fig.update_layout(
        title={'text': 'Sparse Coding', 'x': 0.5, 'xanchor': 'center'},
        height=500,
        width=1300,
        legend=dict(orientation='h', y=-0.15),
        margin=dict(l=40, r=40, t=80, b=40)
    )
    return fig


def save_thumbnail(results, signal, path, figsize=(13, 6)):
    """Static matplotlib rendition of the figure, used as the page thumbnail."""
    keys = list(dict.fromkeys(r['dictionary'] for r in results))
    fig, axes = plt.subplots(1, len(keys), figsize=figsize, squeeze=False)

    for ax, key in zip(axes[0], keys):
        ax.set_title(DICTIONARY_TITLES.get(key, key))
        ax.plot(signal, color='black', lw=2, label='Original signal')
        for res in (r for r in results if r['dictionary'] == key):
            ax.plot(res['reconstruction'], color=res['color'], lw=2, label=res['label'])
        ax.axis('tight')
        ax.legend(shadow=False, loc='best')

    fig.subplots_adjust(.04, .07, .97, .90, .09, .2)
    fig.savefig(path, dpi=40)
    plt.close(fig)
    return path


def main():
    parser = argparse.ArgumentParser(description="Render the sparse coding example.")
    parser.add_argument('--output', type=str, default='sparse_coding.html', help='HTML file to write.')
    parser.add_argument('--thumbnail', type=str, default=None, help='Optional thumbnail image path.')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    signal = generate_signal()
    results = run_sparse_coding(signal)
    for res in results:
        print(f"[{res['dictionary']}] {res['label'].replace(chr(10), ' ')}")

    fig = create_sparse_coding_figure(results, signal)
    fig.write_html(args.output, include_plotlyjs='cdn')
    print(f"Generated chart: {args.output}")

    if args.thumbnail:
        save_thumbnail(results, signal, args.thumbnail)
        print(f"Generated thumbnail: {args.thumbnail}")


if __name__ == '__main__':
    main()
