"""
Submit scripts

The templates are rendered with ``str.format()``: shell braces are doubled (``${{VAR}}``),
single braces are orcakit placeholders.
"""

# Submission scripts stored as a dictionary with the job kind as the key
submit_scripts = {
    'orca': r"""#!/bin/bash

########## BEGIN QUEUEING SYSTEM JOB PARAMETERS ################################
#
#SBATCH --job-name={name}
#SBATCH --output=%x.%j.log
#SBATCH --error=%x.%j.log
#SBATCH --time={walltime}
#SBATCH --signal=B:USR1@{signal_seconds}
#SBATCH --nodes=1
#SBATCH --ntasks-per-node={nprocs}
#SBATCH --mem-per-cpu={mem_per_cpu}
{gres}#
########## END QUEUEING SYSTEM JOB PARAMETERS ##################################

# Function to handle job timeout
timeout() {{
    echo; pkill -f -o -e " {input_file}"; sleep 10
    sed -i '/Terminated/{{G}}' "{name}.time"
    echo; cat "{name}.time"

    echo -e "\n\n*** JOB ${{SLURM_JOB_ID}} ON $HOSTNAME CANCELED AT `date +'%Y-%m-%d %H:%M:%S'` DUE TO TIME LIMIT ***"

    echo -e "\n\n### Cleaning up files... removing unnecessary scratch files..."
    keep_files_pattern=$(printf "! -name %s " {keep_files} {timeout_keep_files})
    echo; find ${{TMP_WORK_DIR}} -maxdepth 1 -type f ${{keep_files_pattern}} -exec rm -vf {{}} \;
    sleep 10 # Sleep some time so potential stale NFS handles can disappear

    echo -e "\n\n### Copying back tgz-archive of results to SLURM_SUBMIT_DIR..."
    echo; mkdir -vp "${{SLURM_SUBMIT_DIR}}" # If submit directory has been deleted or moved
    echo "Creating result tgz-file '${{SLURM_SUBMIT_DIR}}/${{JOB_WORK_DIR}}.tgz'..."
    echo; cd "${{TMP_BASE_DIR}}"
    tar -zcvf "${{SLURM_SUBMIT_DIR}}/${{JOB_WORK_DIR}}.tgz" "${{JOB_WORK_DIR}}"

    echo -e "\n\n### Final cleanup: Removing TMP_WORK_DIR..."
    echo; rm -rvf "${{TMP_WORK_DIR}}"

    end=$(date +%s)

    echo -e "\n\n### Calculating duration..."
    echo -e "\nEND_TIME = `date +'%Y-%m-%d %H:%M:%S'`"
    diff=$[end-start]
    if [ $diff -lt 60 ]; then
        echo -e "\nRuntime (approx.): '$diff' secs"
    elif [ $diff -ge 60 ]; then
        echo -e "\nRuntime (approx.): '$[$diff / 60]' min(s) '$[$diff % 60]' secs"
    fi

    echo -e "\n\n### Exiting with exit code..."
    echo -e "\nORCA exit-code: 143"
    echo; exit 143
}}

# Trap USR1 signal to handle job timeout
trap 'timeout' USR1


start=$(date +%s)


echo -e "\n### Setting up shell environment and defaults for environment vars..."
# Reset all language and locale dependencies (write floats with a dot "."):
unset LANG; export LC_ALL="C"
# Disable all external multi-threading => MPI is in control
export MKL_NUM_THREADS=1; export OMP_NUM_THREADS=1
# Define fallbacks and "sanitize" important environment variables:
export USER="${{USER:=`logname`}}"
export SLURM_JOB_ID="${{SLURM_JOB_ID:=`date +%s`}}"
export SLURM_SUBMIT_DIR="${{SLURM_SUBMIT_DIR:=`pwd`}}"
export SLURM_JOB_NAME="${{SLURM_JOB_NAME:=`basename "$0"`}}"
export SLURM_JOB_NAME="${{SLURM_JOB_NAME//[^a-zA-Z0-9._-]/_}}"
export SLURM_JOB_NUM_NODES="${{SLURM_JOB_NUM_NODES:=1}}"
export SLURM_CPUS_ON_NODE="${{SLURM_CPUS_ON_NODE:=1}}"
export SLURM_NTASKS="${{SLURM_NTASKS:=1}}"


echo -e "\n\n### Printing basic job infos to stdout..."
echo -e "\nSTART_TIME          = `date +'%Y-%m-%d %H:%M:%S'`"
echo "HOSTNAME            = ${{HOSTNAME}}"
echo "USER                = ${{USER}}"
echo "SLURM_JOB_NAME      = ${{SLURM_JOB_NAME}}"
echo "SLURM_JOB_ID        = ${{SLURM_JOB_ID}}"
echo "SLURM_SUBMIT_DIR    = ${{SLURM_SUBMIT_DIR}}"
echo "SLURM_JOB_NUM_NODES = ${{SLURM_JOB_NUM_NODES}}"
echo "SLURM_CPUS_ON_NODE  = ${{SLURM_CPUS_ON_NODE}}"
echo "SLURM_NTASKS        = ${{SLURM_NTASKS}}"
echo "SLURM_JOB_NODELIST  = ${{SLURM_JOB_NODELIST}}"
echo "---------------- ulimit -a -S ----------------"
ulimit -a -S
echo "---------------- ulimit -a -H ----------------"
ulimit -a -H
echo "----------------------------------------------"


# --- Setting up working directory --- #

echo -e "\n\n### Creating TMP_WORK_DIR directory and changing to it..."
echo; if test -z "$SLURM_JOB_NUM_NODES" -o "$SLURM_JOB_NUM_NODES" = "1"; then
    if test -n "${{SCRATCH}}" -a -e "${{SCRATCH}}" -a -d "${{SCRATCH}}" -a "${{SCRATCH}}" != "/scratch" -a "${{SCRATCH}}" != "/tmp" -a "${{SCRATCH}}" != "/ramdisk"; then
        TMP_BASE_DIR="${{SCRATCH:=/tmp/${{USER}}}}"
    else
        TMP_BASE_DIR="${{TMPDIR:=/tmp/${{USER}}}}"
    fi
else
    TMP_BASE_DIR="${{SCRATCH:=/tmp/${{USER}}}}"
fi

JOB_WORK_DIR="${{SLURM_JOB_NAME}}.${{SLURM_JOB_ID%%.*}}"
TMP_WORK_DIR="${{TMP_BASE_DIR}}/${{JOB_WORK_DIR}}"
echo "TMP_BASE_DIR = ${{TMP_BASE_DIR}}"
echo "JOB_WORK_DIR = ${{JOB_WORK_DIR}}"
echo "TMP_WORK_DIR = ${{TMP_WORK_DIR}}"

if test "${{SLURM_JOB_NUM_NODES:-1}}" -gt 1 -a -n "$SLURM_JOB_NODELIST" -a "$TMP_BASE_DIR" != "$SLURM_SUBMIT_DIR"
then
    for host in $(scontrol show hostnames "$SLURM_JOB_NODELIST")
    do
        echo -e "\nmkdir ${{TMP_WORK_DIR}} on ${{host}}"
        ssh "$host" mkdir -vp ${{TMP_WORK_DIR}}
    done
else
    echo -e "\nmkdir ${{TMP_WORK_DIR}} on ${{HOSTNAME}}"
    mkdir -vp ${{TMP_WORK_DIR}}
fi
echo; mkdir -vp ${{TMP_WORK_DIR}}


# --------- Running the job ----------- #

echo -e "\n### Loading software module..."
cd "${{TMP_WORK_DIR}}"
module purge
module load {orca_module}
if [ -z "$ORCA_VERSION" ]; then
    echo "ERROR: Failed to load '{orca_module}' module."
    exit 101
fi
echo "ORCA_VERSION = $ORCA_VERSION"
module list


echo "### Copying input files to TMP_WORK_DIR..."
echo; files_to_copy=({files_to_copy})
for file in "${{files_to_copy[@]}}"; do
    if [ -n "$file" ]; then
        cp -v "${{SLURM_SUBMIT_DIR}}/${{file}}" "${{TMP_WORK_DIR}}"
    fi
done

scontrol show hostnames > "{name}.nodes"
echo -ne "\nNode list in {name}.nodes: "
cat "${{TMP_WORK_DIR}}/{name}.nodes"


echo -e "\n\n### Displaying internal ORCA environments..."
echo -e "\nORCA_BIN_DIR = ${{ORCA_BIN_DIR}}"
echo "ORCA_EXA_DIR = ${{ORCA_EXA_DIR}}"
echo "ORCA_VERSION = ${{ORCA_VERSION}}"


echo -e "\n\n### Starting ORCA job..."
echo -e "\nORCA starts on $HOSTNAME in $(pwd) with files in the working directory: \n$(ls -1 | tr '\n' ' ')"
echo -e "\nFollowing nodes have been allocated for the job: $SLURM_JOB_NODELIST"
echo -e "\nOMPI_MCA_mtl = $OMPI_MCA_mtl"; echo "OMPI_MCA_pml = $OMPI_MCA_pml"
{{ time -p $ORCA_BIN_DIR/orca "{input_file}" > "{name}.out" 2>&1; }} 2> "{name}.time" &

wait; orca_exit_code=$? # Wait for background task to finish
trap - USR1 # Release signal handler for USR1
echo; cat "{name}.time"


echo -e "\n\n### Cleaning up files... removing unnecessary scratch files..."
keep_files_pattern=$(printf "! -name %s " {keep_files})
echo; find ${{TMP_WORK_DIR}} -maxdepth 1 -type f ${{keep_files_pattern}} -exec rm -vf {{}} \;
sleep 10 # Sleep some time so potential stale NFS handles can disappear


echo -e "\n\n### Copying back tgz-archive of results to SLURM_SUBMIT_DIR..."
echo; mkdir -vp "${{SLURM_SUBMIT_DIR}}" # If submit directory has been deleted or moved
echo "Creating result tgz-file '${{SLURM_SUBMIT_DIR}}/${{JOB_WORK_DIR}}.tgz'..."
echo; cd "${{TMP_BASE_DIR}}"
tar -zcvf "${{SLURM_SUBMIT_DIR}}/${{JOB_WORK_DIR}}.tgz" "${{JOB_WORK_DIR}}"


echo -e "\n\n### Final cleanup: Removing TMP_WORK_DIR..."
echo; rm -rvf "${{TMP_WORK_DIR}}"


end=$(date +%s)


echo -e "\n\n### Calculating duration..."
echo -e "\nEND_TIME = `date +'%Y-%m-%d %H:%M:%S'`"
diff=$[end-start]
if [ $diff -lt 60 ]; then
    echo -e "\nRuntime (approx.): '$diff' secs"
elif [ $diff -ge 60 ]; then
    echo -e "\nRuntime (approx.): '$[$diff / 60]' min(s) '$[$diff % 60]' secs"
fi


echo -e "\n\n### Exiting with exit code..."
echo -e "\nORCA exit-code: $orca_exit_code"
echo; exit $orca_exit_code
""",

    'smiles2xyz': r"""#!/bin/bash

########## BEGIN QUEUEING SYSTEM JOB PARAMETERS ################################
#
#SBATCH --job-name={name}
#SBATCH --output=%x.%j.log
#SBATCH --error=%x.%j.log
#SBATCH --time={time}
#SBATCH --nodes=1
#SBATCH --ntasks-per-node={cpus}
#SBATCH --mem-per-cpu={mem_per_cpu}
#
########## END QUEUEING SYSTEM JOB PARAMETERS ##################################

echo -e "\n### Setting up shell environment..."
# Reset all language and locale dependencies (write floats with a dot "."):
unset LANG; export LC_ALL="C"
export SLURM_SUBMIT_DIR="${{SLURM_SUBMIT_DIR:=`pwd`}}"
export TMPDIR="${{TMPDIR:=/tmp/${{USER}}}}"

echo -e "\nSTART_TIME       = `date +'%Y-%m-%d %H:%M:%S'`"
echo "HOSTNAME         = ${{HOSTNAME}}"
echo "SLURM_JOB_NAME   = ${{SLURM_JOB_NAME}}"
echo "SLURM_JOB_ID     = ${{SLURM_JOB_ID}}"
echo "SLURM_SUBMIT_DIR = ${{SLURM_SUBMIT_DIR}}"
echo "TMPDIR           = ${{TMPDIR}}"


echo -e "\n### Loading software modules..."
module --quiet purge
module --quiet load {openbabel_module}
module --quiet load {xtb_module}
module list


echo -e "\n### Running the job..."
cd "${{SLURM_SUBMIT_DIR}}"
{command}
exit_status=$?

echo -e "\nEND_TIME = `date +'%Y-%m-%d %H:%M:%S'`"
echo -e "\nJob exit-code: ${{exit_status}}"
echo; exit ${{exit_status}}
""",
}
