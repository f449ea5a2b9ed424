"""TaxWise salary tax estimator.

``taxwise.tax.calculator.compute_tax`` holds the slab arithmetic; the API,
form page and CLI are thin callers around it.
"""

__version__ = "0.1.0"
