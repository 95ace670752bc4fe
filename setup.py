from setuptools import setup, find_packages

setup(
    name='wordspace',
    version='0.1',
    packages=find_packages(exclude=['tests*']),
    license='MIT',
    description='First-fit bookkeeping for a fixed-size managed word address space',
    python_requires='>=3.8',
    install_requires=['numpy'],
    extras_require={'test': ['pytest']},
)
