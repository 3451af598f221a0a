"""
Provides project-level commands. Commands are run via `python setup.py <command> [args]`

Commands available:

- apidoc: regenerate reST docs for inline pydoc comments
"""

from setuptools import setup, Command

import os


class RunInRootCommand(Command):
    user_options = []

    def initialize_options(self):
        self.cwd = None

    def finalize_options(self):
        self.cwd = os.getcwd()

    def run(self):
        assert os.getcwd() == self.cwd, 'Must be in package root: %s' % self.cwd
        self.runcmd()

    def runcmd(self):
        pass


class ApiDocCommand(RunInRootCommand):
    description = "regenerates the API docs"

    def runcmd(self):
        os.system('"sphinx-apidoc" -f -e -o docs/apidoc src')


setup(
    name='denon-control-py',
    version='0.0.1',
    description='Reads and sets the status of Denon AV receivers over their network control protocol.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    package_dir={'': 'src'},
    packages=['denoncontrol', 'denoncontrol.conduit', 'denoncontrol.config', 'denoncontrol.connector',
              'denoncontrol.protocol'],
    package_data={'denoncontrol.config': ['*.cfg']},
    python_requires='>=3.7',
    install_requires=[
        'configobj',
        'zeroconf',
        'typer',
        'rich',
    ],
    extras_require={
        'test': ['pytest', 'PyHamcrest', 'timeout-decorator'],
    },
    entry_points={
        'console_scripts': ['denon-control=denoncontrol.cli:app'],
    },
    zip_safe=False,
    cmdclass={
        'apidoc': ApiDocCommand,
    }
)
