"""
orcakit's settings

You may keep a short YAML version of this file as ``~/.orcakit/settings.yml``.
Any definitions made in the local file will take precedence over this file, e.g.::

    cluster_limits:
      max_walltime_hrs: 72
    orca_default_version: 5.0.4
"""

# The cluster the job scripts are written for (bwForCluster JUSTUS 2 by default).
# All limits are per node.
cluster_limits = {'cores_per_node': 48,               # nprocs should be an integer divisor of this value
                  'min_nprocs': 1,
                  'max_nprocs': 48,
                  'min_maxcore_mb': 100,              # ORCA %maxcore, per process
                  'max_maxcore_mb': 29000,
                  'max_walltime_hrs': 336,
                  'max_scratch_gb': 7300,             # node-local scratch requested via --gres=scratch:<GB>
                  'large_memory_threshold_gb': 187,   # requesting more restricts the job to the large-memory nodes
                  'large_memory_nodes': 220,
                  'total_nodes': 692,
                  }

# SLURM --mem-per-cpu is ORCA's maxcore plus this relative overhead
memory_overhead_factor = 1.1

# Default walltime in hours
default_walltime_hrs = 4

# SLURM signals the batch shell this many seconds before the time limit, so results can still be saved
timeout_signal_seconds = 60

# Environment modules (Lmod)
orca_module = 'chem/orca'
orca_default_version = '6.0.0'
openbabel_module = 'chem/openbabel'
xtb_module = 'chem/xtb'

# Files kept after an ORCA calculation, in addition to the ones the user asks for.
# The job name is prepended to each extension.
orca_keep_extensions = ['.out', '.xyz', '.gbw', '.densities', '.opt', '.hess', '.interp']
# Also kept when the job runs into the time limit (NEB runs write it continuously)
orca_timeout_keep_suffixes = ['_MEP.allxyz']

# xTB geometry optimization levels, see https://xtb-docs.readthedocs.io/en/latest/optimization.html
xtb_opt_thresholds = ['crude', 'sloppy', 'loose', 'lax', 'normal', 'tight', 'vtight', 'extreme']
xtb_default_threshold = 'tight'
xtb_environment = {'MKL_NUM_THREADS': '4',
                   'OMP_NUM_THREADS': '4,1',
                   'OMP_MAX_ACTIVE_LEVELS': '1',
                   'OMP_STACKSIZE': '2G',
                   }

# Resources requested when smiles2xyz submits itself to the scheduler
smiles2xyz_job_settings = {'time': '00:10:00',
                           'cpus': 4,
                           'mem_per_cpu': 2000,  # MB
                           }

# Compute node host names; interactive runs on any other host (e.g., a login node) are refused
compute_node_pattern = r'^n[0-9]+'

submit_command = {'Slurm': 'sbatch'}
module_avail_command = 'module avail'
cluster_soft = 'Slurm'

# Answers accepted when asked whether to continue with questionable settings
yes_answers = ['yes', 'y']
