# utils/comm.py
# process group used when the coupling runs in a single process.
# Any object with a barrier() method (e.g. mpi4py.MPI.COMM_WORLD) can be used instead.


class SerialGroup:
    """
    Process group of one: the barrier has nobody to wait for.
    """

    rank = 0
    size = 1

    def barrier(self):
        pass

    def __repr__(self):
        return "SerialGroup()"
