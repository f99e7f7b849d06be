"""\
HAL+JSON rendering support library.
"""

import setuptools

NAME = 'kt.hal'
VERSION = '1.0.0'

packages = [NAME]


metadata = dict(
    name=NAME,
    version=VERSION,
    author='Keeper Technology, LLC',
    author_email='info@keepertech.com',
    url=f'http://kt-git.keepertech.com/DevTools/{NAME}',
    description=__doc__.strip(),
    packages=packages,
    package_dir={'': 'src'},
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        'Flask>=2.2',
        'zope.component',
        'zope.interface',
        'zope.schema',
    ],
    extras_require={
        'test': [
            'Flask-RESTful',
            'pytest',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
)


if __name__ == '__main__':
    setuptools.setup(**metadata)
