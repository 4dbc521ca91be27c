import os

from setuptools import setup, find_packages

script_dir = os.path.abspath(os.path.dirname(__file__))

required = [
	'numpy',
	'cached_property',
]

with open(os.path.join(script_dir, 'README.md')) as f:
	long_description = f.read()

exec(open(os.path.join(script_dir, 'pairalign/_version.py')).read())

setup(
	name='pairalign',
	version=__version__,
	packages=find_packages(
		include=[
			'pairalign',
			'pairalign.problems',
			'pairalign.io',
			'pairalign.tests',
		]
	),
	python_requires='>=3.7',
	license='MIT',
	install_requires=required,
	extras_require={
		'plot': ['bokeh'],
		'test': ['pytest', 'bokeh'],
	},
	description='Smith-Waterman-Gotoh, Needleman-Wunsch-Gotoh and homopolymer aware alignments for Python',
	long_description=long_description,
	long_description_content_type='text/markdown',
)
