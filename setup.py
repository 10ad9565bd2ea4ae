from setuptools import setup

setup(
    name='quantum-register',
    version='0.1.0',
    description='Sparse state-vector and density-matrix simulator of a qubit register with lazy gate evaluation.',
    package_dir={'': 'src'},
    packages=['quantum_register',
              'quantum_register._gates',
              'quantum_register._simulation',
              'quantum_register._utility'],
    install_requires=[
        'numpy',
        'scipy',
        'qiskit>=1.2',
    ],
    extras_require={
        'test': ['pytest'],
    },
    license='MIT',
    python_requires='>=3.9'
)
