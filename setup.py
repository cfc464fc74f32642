from setuptools import setup, find_packages
setup(
    name='jira-cloud-client',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    include_package_data=True,
    description='Client for submitting CI/CD build and deployment updates to Jira Cloud.',
    python_requires='>=3.9',
    install_requires=[
        'invoke>=2.0.0',
        'pyyaml>=6.0',
        'requests>=2.25.0',
        'pydantic>=2.5.0',
        'pydantic-core>=2.14.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'jira-cloud = jira_cloud_client.tasks:program.run',
        ],
    },
)
