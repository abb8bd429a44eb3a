# descriptions.py

DESCRIPTIONS = {
    "scatter-geo-text": """
    **Text and Markers on Maps**

    **What it Shows:** Ten Canadian cities placed on a North America map. Each city is a marker with its own color and a text label anchored at a chosen position around the marker.

    **How it Works:**
    - **Trace:** A single `Scattergeo` trace in `markers+text` mode. Longitude, latitude, label, marker color and text position are all per-point arrays of the same length.
    - **Layout:** The `geo` layout limits the map to North America and zooms in with longitude and latitude ranges. Rivers and lakes are drawn in white, land in a pale yellow, and country and province borders in light grey.
    - **Text Anchors:** `textposition` accepts any of the nine anchor positions (e.g. `top right`, `bottom left`), which keeps labels of nearby cities such as Victoria and Vancouver from colliding.
    """,

    "sparse-coding": """
    **Sparse Coding**

    **What it Shows:** A piecewise constant signal is transformed into a sparse combination of Ricker (Mexican hat) wavelets and reconstructed from that sparse code. The left panel uses a dictionary of wavelets of a single width; the right panel mixes five widths.

    **How to Interpret:**
    - **Fixed vs. Multiple Widths:** Wavelets of one width cannot follow the sharp step of the signal, so every method leaves a visible error on the left. The multi-width dictionary adds narrow atoms for the edge and wide atoms for the plateaus.
    - **OMP:** Orthogonal matching pursuit picks a fixed number of atoms (15) greedily.
    - **Lasso:** Coordinate descent with an L1 penalty; the number of atoms is not fixed and depends on the penalty weight. The solver may stop before converging, which only affects the last decimals of the error.
    - **Thresholding w/ debiasing:** Soft thresholding selects atoms, then an ordinary least-squares refit on those atoms removes the shrinkage bias of the threshold.
    """,
}
