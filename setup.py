#!/usr/bin/env python3
"""A setuptools based setup module.

See:
https://packaging.python.org/en/latest/distributing.html
https://github.com/pypa/sampleproject

Extra supported commands are:
* selftest, to run the known-answer tests against the installed backends
* pypi, to generate sdist, bdist_wheel, and push to PyPi
"""

import os
import re
import shutil
import sys
from pathlib import Path
from subprocess import run

from setuptools import find_packages, setup


class TempWorkDir:
    """Switches the working directory to be the one on which this file lives,
       while within the 'with' block.
    """
    def __init__(self, new=None):
        self.original = None
        self.new = new or str(Path(__file__).parent.resolve())

    def __enter__(self):
        self.original = str(Path('.').resolve())
        os.makedirs(self.new, exist_ok=True)
        os.chdir(self.new)
        return self

    def __exit__(self, *args):
        os.chdir(self.original)


LIBRARY_DIR = Path('igecrypt')


def main(argv):
    if len(argv) >= 2 and argv[1] == 'selftest':
        # Needed since we're importing local files
        sys.path.insert(0, os.path.dirname(__file__))
        from igecrypt.selftest import main as selftest
        sys.exit(selftest(argv[2:]))

    elif len(argv) >= 2 and argv[1] == 'pypi':
        # Make sure we don't push something that can't pass its own vectors
        sys.path.insert(0, os.path.dirname(__file__))
        try:
            from igecrypt.selftest import run as selftest
        except ImportError:
            print('Packaging for PyPi aborted, importing the module failed.')
            return

        if selftest('pyaes'):
            print('Packaging for PyPi aborted, the self-test failed.')
            return

        remove_dirs = ['__pycache__', 'build', 'dist', 'igecrypt.egg-info']
        for root, _dirs, _files in os.walk(LIBRARY_DIR, topdown=False):
            # setuptools is including __pycache__ for some reason
            if root.endswith('/__pycache__'):
                remove_dirs.append(root)
        for x in remove_dirs:
            shutil.rmtree(x, ignore_errors=True)

        run('python3 setup.py sdist', shell=True)
        run('python3 setup.py bdist_wheel', shell=True)
        run('twine upload dist/*', shell=True)
        for x in ('build', 'dist', 'igecrypt.egg-info'):
            shutil.rmtree(x, ignore_errors=True)

    else:
        # Get the long description from the README file
        with open('README.rst', 'r', encoding='utf-8') as f:
            long_description = f.read()

        with open('igecrypt/version.py', 'r', encoding='utf-8') as f:
            version = re.search(r"^__version__\s*=\s*'(.*)'.*$",
                                f.read(), flags=re.MULTILINE).group(1)
        setup(
            name='igecrypt',
            version=version,
            description="AES in Infinite Garble Extension (IGE) mode",
            long_description=long_description,

            license='MIT',

            # See https://stackoverflow.com/a/40300957/4759433
            # -> https://www.python.org/dev/peps/pep-0345/#requires-python
            python_requires='>=3.5',

            # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
            classifiers=[
                #   3 - Alpha
                #   4 - Beta
                #   5 - Production/Stable
                'Development Status :: 4 - Beta',

                'Intended Audience :: Developers',
                'Topic :: Security :: Cryptography',

                'License :: OSI Approved :: MIT License',

                'Programming Language :: Python :: 3',
            ],
            keywords='aes ige cipher block mode encryption mtproto',
            packages=find_packages(exclude=['tests*']),
            install_requires=['pyaes'],
            extras_require={
                'tests': ['pytest']
            },
            entry_points={
                'console_scripts': [
                    'igecrypt-selftest = igecrypt.selftest:main'
                ]
            }
        )


if __name__ == '__main__':
    with TempWorkDir():
        main(sys.argv)
