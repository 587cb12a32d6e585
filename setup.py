from setuptools import find_packages, setup

package_name = 'spiral_reference_line'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/' + package_name + '/config', [
            'config/residuals.yaml',
        ]),
    ],
    install_requires=['setuptools', 'numpy', 'casadi', 'PyYAML'],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.8',
    zip_safe=True,
    description='Cubic-heading spiral segments and least-squares residuals '
                'for fitting continuous-curvature reference lines',
    tests_require=['pytest'],
)
