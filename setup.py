"""
Setup for Text-Mining Scoring Pipeline.

Tokenization, tf-idf, pairwise co-occurrence statistics, LDA topic models
and lexicon sentiment for literary corpora.
"""
from setuptools import setup, find_packages

setup(
    name="text-mining-scoring",
    version="1.0.0",
    description=(
        "Text-mining scoring pipeline: tokenization, tf-idf weighting, "
        "pairwise term correlation, LDA topic models and lexicon sentiment."
    ),
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
        "scipy>=1.11.0",
        "scikit-learn>=1.3.0",
        "nltk>=3.8.1",
        "joblib>=1.3.0",
    ],
    extras_require={
        "test": ["pytest>=7.4.0"],
    },
    entry_points={
        "console_scripts": ["text-mining-demo = main:main"]
    },
    keywords=[
        "text-mining", "tf-idf", "topic-modeling", "lda",
        "sentiment-analysis", "nlp", "digital-humanities",
    ],
)
