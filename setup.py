from setuptools import find_namespace_packages, setup

# The packages have no __init__.py files, so they are found as namespace packages.
# For development work, install in editable mode:
#  pip install -e .[test]
setup(
    name = 'AgiView',
    version = '1.0',
    description = 'Converts Sierra AGI VIEW resources to bitmaps',
    package_dir = {'': 'src'},
    packages = find_namespace_packages(where = 'src', include = ['AgiView', 'AgiView.*']),
    python_requires = '>=3.8',
    install_requires = [
        'asset_extraction_framework',
        'self_documenting_struct',
        'Pillow',
    ],
    extras_require = {
        'test': ['pytest'],
    },
    entry_points = {
        'console_scripts': [
            'AgiView = AgiView.Engine:main',
        ],
    })
